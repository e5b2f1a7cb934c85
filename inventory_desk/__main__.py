from inventory_desk.app.main import main

raise SystemExit(main())

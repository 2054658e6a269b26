from header_bundle.cli import main

raise SystemExit(main())

from website_downloader.cli import main

raise SystemExit(main())

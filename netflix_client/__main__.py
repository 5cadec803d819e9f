from netflix_client.cli import main

raise SystemExit(main())

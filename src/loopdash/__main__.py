from loopdash.cli import main

main()

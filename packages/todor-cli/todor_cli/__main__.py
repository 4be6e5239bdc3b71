from todor_cli.cli import main

main()

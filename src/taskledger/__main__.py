from taskledger.cli.main import main

main()

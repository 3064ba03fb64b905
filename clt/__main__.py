from clt.cli.main import main

main()

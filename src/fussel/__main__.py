from fussel.cli.app import main

main()

from logsim.cli import main

main()

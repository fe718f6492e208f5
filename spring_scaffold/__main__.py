from spring_scaffold.orchestrator import main

main()

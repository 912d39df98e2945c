from type_dependencies.tools.cli import main

main()

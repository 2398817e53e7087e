from yang.cli import main

main()

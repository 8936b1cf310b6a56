from initguard.cli import main

main()

from shell_tutor.cli import main

main()

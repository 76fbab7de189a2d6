from streamform.cli import main

main()

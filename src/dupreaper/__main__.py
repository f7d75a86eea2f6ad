from dupreaper.cli import main

main()

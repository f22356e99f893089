from tinuefinder.app import main

main()

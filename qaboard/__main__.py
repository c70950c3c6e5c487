from qaboard.app import main

main()

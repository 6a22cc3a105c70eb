from echorunner.smoke import main

main()

from helpdesk.web.app import main

main()

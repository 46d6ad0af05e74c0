from chat_backend.server import main

main()

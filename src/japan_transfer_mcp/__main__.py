from japan_transfer_mcp.server import main

main()

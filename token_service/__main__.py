from token_service.main import run

run()

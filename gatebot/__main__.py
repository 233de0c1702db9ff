from gatebot.main import run

run()

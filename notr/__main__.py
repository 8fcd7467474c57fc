from notr.main import run

run()

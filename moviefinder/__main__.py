from moviefinder.app import run

run()

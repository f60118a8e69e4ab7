from snippetbox.main import run

run()

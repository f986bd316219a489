from transcript_viewer.cli import run

run()

from ikuuucheckin.cli_checkin import run

run()

from create_filament.cli import cli

if __name__ == "__main__":
    cli()

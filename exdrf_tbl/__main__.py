from exdrf_tbl.cli import cli

if __name__ == "__main__":
    cli()

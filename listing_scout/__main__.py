from listing_scout.cli import cli

cli()

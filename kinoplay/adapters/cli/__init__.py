"""Interface en ligne de commande de Kinoplay (typer + rich)."""

from messe import create_app

app = create_app()

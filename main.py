from groupboard.main import create_app

app = create_app()

# uvicorn main:app
# uvicorn main:app --reload

"""Development entry point: ``python app.py`` or ``flask --app app run``."""

import os

from src.tutoring_admin.tutoring_admin.main import create_app

app = create_app()

if __name__ == '__main__':
    app.run(
        host=os.getenv("FLASK_RUN_HOST", "127.0.0.1"),
        port=int(os.getenv("FLASK_RUN_PORT", "5000")),
        debug=app.config["DEBUG"],
    )

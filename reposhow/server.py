"""
Flask app exposing the run-of-show generator over HTTP.
"""

from typing import Optional
from flask import Flask, jsonify, request

from reposhow.config import Settings, configure_logging, load_settings
from reposhow.refinery.engine import GenerationClient
from reposhow.service import RunOfShowService

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def create_app(service: Optional[RunOfShowService] = None, settings: Optional[Settings] = None) -> Flask:
    """
    Builds the app. The generation client is created once here and shared by
    every request.
    """
    if service is None:
        settings = settings or load_settings()
        generator = GenerationClient(api_key=settings.anthropic_api_key, model_name=settings.model_name)
        service = RunOfShowService(generator, github_token=settings.github_token)

    app = Flask(__name__)
    app.config["RUN_OF_SHOW_SERVICE"] = service

    @app.route("/api/generate-runofshow", methods=["POST", "OPTIONS"])
    def generate_run_of_show():
        if request.method == "OPTIONS":
            return "", 200, CORS_HEADERS

        body = request.get_json(silent=True)
        payload, status = service.handle(body)
        return jsonify(payload), status

    return app


def main():
    configure_logging()
    settings = load_settings()
    app = create_app(settings=settings)
    app.run(host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()

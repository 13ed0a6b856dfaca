"""
Schema do endpoint de healthcheck.
"""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """
    Resposta de GET /health.

    Attributes:
        status: "healthy" quando a aplicação está respondendo
        app_name: Nome da aplicação (APP_NAME)
        environment: Ambiente atual (ENVIRONMENT)
        version: Versão da API
    """

    status: str
    app_name: str
    environment: str
    version: str

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "status": "healthy",
                    "app_name": "Rental API",
                    "environment": "development",
                    "version": "0.1.0",
                }
            ]
        }
    }

import logging

from fastapi import FastAPI

from basquete import __version__
from basquete.config import LOG_LEVEL
from basquete.database import init_db
from basquete.errors import install_error_handlers
from basquete.routes import athletes, auth, financial, matches, users


# --- 1. LOGGING ---
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("basquete")


# --- 2. INICIALIZAÇÃO DA API ---
def create_app() -> FastAPI:
    app = FastAPI(title="Sistema de Basquete API", version=__version__)
    install_error_handlers(app)

    # --- 3. ROTAS DA API ---
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(athletes.router)
    app.include_router(matches.router)
    app.include_router(financial.router)

    @app.on_event("startup")
    def startup_event():
        init_db()
        logger.info("✅ Banco de dados inicializado")

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=False)

from fastapi import FastAPI

from .api import router
from .logging_utils import configure_logging

configure_logging()

app = FastAPI(title="rulegraph - rule-gated graph solver")

app.include_router(router, prefix="/api")

@app.get("/")
async def root():
    return {"message": "rulegraph API is running"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

import logging

import uvicorn
from fastapi import FastAPI
from dotenv import load_dotenv

from bessertanken.routers import fuel

# Load Environment Variables (API key, base URL)
load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="BesserTanken",
    description="Fuel types, station search and station details from the Kraftstoffbilliger API.",
    version="1.0.0"
)

app.include_router(fuel.router, prefix="/api/v1", tags=["Fuel Price"])

@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "BesserTanken"}

if __name__ == "__main__":
    # Runs the server on localhost:8000
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)

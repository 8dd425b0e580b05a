import uvicorn

from .config import HOST, PORT, LOG_LEVEL

if __name__ == "__main__":
    uvicorn.run("employee_api.main:APP", host=HOST, port=PORT, log_level=LOG_LEVEL.lower())

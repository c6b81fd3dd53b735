import uvicorn

from devtrack.config import settings


def main():
    uvicorn.run("devtrack.main:app", host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    main()

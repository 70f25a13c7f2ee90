import uvicorn
import os


def main():
    """
    Run the FastAPI application using uvicorn
    """
    # One worker only: the retry ledger lives in this process's memory
    uvicorn.run(
        "parcelsync.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        workers=1
    )


if __name__ == "__main__":
    main()

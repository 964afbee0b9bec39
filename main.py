from fastapi import FastAPI

from routes.extraction import extract_router

app = FastAPI()
app.include_router(extract_router)


@app.get('/')
def get_root():
    return {"message": "Document Structuring API"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)

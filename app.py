import os

from excel_analyst.app import app

if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", "3002"))
    print(f"🚀 Backend: http://localhost:{port}")
    print(f"📍 API Docs: http://localhost:{port}/docs")
    uvicorn.run("app:app", host="0.0.0.0", port=port, reload=True)

import json
import os
from typing import Optional

import requests

API = os.getenv("NAVASSIST_API", "http://127.0.0.1:8000")

def call(msg: str, sid: Optional[str] = None) -> str:
  r = requests.post(f"{API}/chat", json={"message": msg, "session_id": sid})
  r.raise_for_status()
  data = r.json()
  print(json.dumps(data, indent=2))
  return data["session_id"]

if __name__ == '__main__':
  sid = call("take me to Central Park")
  sid = call("I want to be there by 5:30 pm", sid)
  sid = call("sure, well-lit roads please", sid)
  sid = call("let's avoid highways", sid)
  sid = call("no breaks", sid)
  sid = call("okay start", sid)
  sid = call("find a place for dinner")
  sid = call("I have 3 hours to explore", sid)

import requests
from typing import Optional, Dict, Any

class DosageClient:
    def __init__(self, base_url: str, lang: Optional[str] = None):
        self.base_url = base_url.rstrip("/")
        self.headers = {"Content-Type": "application/json"}
        if lang: self.headers["Accept-Language"] = lang

    def _h(self, session_id: Optional[str]) -> Dict[str, str]:
        h = dict(self.headers)
        if session_id: h["X-Session-Id"] = session_id
        return h

    def products(self, *, session_id: Optional[str]=None, lang: Optional[str]=None, timeout:int=15) -> Dict[str,Any]:
        params = {"lang": lang} if lang else None
        r = requests.get(f"{self.base_url}/v1/products", params=params, headers=self._h(session_id), timeout=timeout)
        r.raise_for_status(); return r.json()

    def dosage(self, *, product_id: str, weight: Any, route: Optional[str]=None,
               lang: Optional[str]=None, session_id: Optional[str]=None, timeout:int=15) -> Dict[str,Any]:
        payload: Dict[str, Any] = {"product_id": product_id, "weight": weight}
        if route: payload["route"] = route
        if lang: payload["lang"] = lang
        r = requests.post(f"{self.base_url}/v1/dosage", json=payload, headers=self._h(session_id), timeout=timeout)
        r.raise_for_status(); return r.json()

    def get_language(self, *, session_id: str, timeout:int=15) -> Dict[str,Any]:
        r = requests.get(f"{self.base_url}/v1/language", headers=self._h(session_id), timeout=timeout)
        r.raise_for_status(); return r.json()

    def set_language(self, *, session_id: str, lang: str, timeout:int=15) -> Dict[str,Any]:
        r = requests.put(f"{self.base_url}/v1/language", json={"lang": lang}, headers=self._h(session_id), timeout=timeout)
        r.raise_for_status(); return r.json()

# /scripts/interactive_cli.py
# Interactive CLI for the dosage calculator:
# 1) pick a product, enter weight (and route for Artesun)
# 2) compute via the HTTP API (/v1/dosage) or in-process (--local)
# 3) print the localized plan
#
# Usage:
#   python scripts/interactive_cli.py --local
#   python scripts/interactive_cli.py --base-url http://127.0.0.1:8000 --lang zh
#   python scripts/interactive_cli.py --local --product artesun --weight 20 --route iv
#
# Requires: requests (remote mode)

from __future__ import annotations
import argparse, json, sys, uuid
from typing import Optional, Dict, Any, Callable

import requests

from clients.dosage_client import DosageClient
from dosecalc.domain.catalog import DEFAULT_CATALOG, get_product
from dosecalc.services.weight_input import (
    DEFAULT_WEIGHT, DEFAULT_ROUTE, clamp_weight, parse_weight,
)


# -------------------------------
# CLI utilities
# -------------------------------
def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Interactive antimalarial dosage calculator")
    ap.add_argument("--base-url", default="http://127.0.0.1:8000", help="API base URL")
    ap.add_argument("--local", action="store_true", help="Compute in-process instead of calling the API")
    ap.add_argument("--lang", default=None, help="Display language (en | zh | fr)")
    ap.add_argument("--session-id", default=None, help="Use a fixed X-Session-Id (else auto-generate)")
    ap.add_argument("--product", default=None, help="Product id (skips the prompt)")
    ap.add_argument("--weight", default=None, help="Weight in kg (skips the prompt)")
    ap.add_argument("--route", default=None, choices=["iv", "im"], help="Injection route (Artesun)")
    ap.add_argument("--clamp", action="store_true", help="Clamp weight to the dial range before computing")
    ap.add_argument("--json", action="store_true", help="Print the raw response as JSON")
    ap.add_argument("--timeout", type=int, default=15)
    return ap.parse_args(argv)

def print_div():
    print("-" * 64)

def color(s: str, c: str) -> str:
    # minimal ANSI color
    colors = {
        "green": "\033[92m", "red": "\033[91m", "yellow": "\033[93m",
        "cyan": "\033[96m", "blue": "\033[94m", "end": "\033[0m"
    }
    return f"{colors.get(c,'')}{s}{colors['end']}"

def kind_color(kind: str) -> str:
    if kind in ("tablet", "vial"): return "green"
    if kind == "out_of_range": return "yellow"
    return "red"


# -------------------------------
# Rendering
# -------------------------------
def render(resp: Dict[str, Any], use_color: bool = True) -> str:
    paint = color if use_color else (lambda s, c: s)
    kind = resp.get("kind", "?")
    out = [paint(resp.get("title", ""), "cyan")]
    if resp.get("subtitle"):
        out.append(resp["subtitle"])
    if resp.get("message"):
        out.append(paint(resp["message"], kind_color(kind)))
    for line in resp.get("summary") or []:
        out.append(f"  • {line}")
    return "\n".join(out)


# -------------------------------
# Compute backends
# -------------------------------
def local_backend() -> Callable[..., Dict[str, Any]]:
    from dosecalc.application.commands import ComputeDosageCommand
    from dosecalc.container import get_compute_use_case
    uc = get_compute_use_case()

    def _run(*, product_id: str, weight: Any, route: Optional[str], lang: Optional[str]) -> Dict[str, Any]:
        cmd = ComputeDosageCommand(product_id=product_id, weight=weight, route=route, lang=lang)
        return uc.execute(cmd)
    return _run

def remote_backend(client: DosageClient, session_id: str) -> Callable[..., Dict[str, Any]]:
    def _run(*, product_id: str, weight: Any, route: Optional[str], lang: Optional[str]) -> Dict[str, Any]:
        return client.dosage(product_id=product_id, weight=weight, route=route, lang=lang, session_id=session_id)
    return _run

def product_ids(args) -> list[str]:
    if args.local:
        return DEFAULT_CATALOG.ids()
    client = DosageClient(args.base_url)
    return [p["id"] for p in client.products(lang=args.lang, timeout=args.timeout).get("items", [])]

def prepare_weight(raw: Any, product_id: str, clamp: bool) -> Any:
    """Parse '35,5 kg' style input; optionally clamp like the dial does."""
    w = parse_weight(raw)
    if w is None:
        return raw  # let the engine report it as invalid input
    if clamp:
        w = clamp_weight(w, get_product(product_id))
    return w

def ask(prompt: str, default: Optional[str] = None) -> str:
    suffix = f" [{default}]" if default else ""
    val = input(f"{prompt}{suffix}: ").strip()
    return val or (default or "")


def run_once(compute, args, product_id: str, raw_weight: Any, route: Optional[str]) -> Dict[str, Any]:
    weight = prepare_weight(raw_weight, product_id, args.clamp)
    resp = compute(product_id=product_id, weight=weight, route=route, lang=args.lang)
    print_div()
    print(json.dumps(resp, indent=2, ensure_ascii=False) if args.json else render(resp))
    return resp


def main(argv=None) -> int:
    args = parse_args(argv)
    session_id = args.session_id or str(uuid.uuid4())

    if args.local:
        compute = local_backend()
    else:
        client = DosageClient(args.base_url, lang=args.lang)
        compute = remote_backend(client, session_id)
        if args.lang:
            try:
                client.set_language(session_id=session_id, lang=args.lang, timeout=args.timeout)
            except requests.RequestException as e:
                print(color(f"[warn] could not store language preference: {e}", "yellow"))

    try:
        if args.product and args.weight is not None:
            resp = run_once(compute, args, args.product, args.weight, args.route)
            return 0 if resp.get("kind") in ("tablet", "vial") else 2

        ids = product_ids(args)
        print(color(f"Products: {', '.join(ids)}   (empty product to quit)", "blue"))
        while True:
            product_id = ask("Product", args.product)
            if not product_id:
                return 0
            raw_weight = ask("Weight (kg)", str(DEFAULT_WEIGHT))
            route = None
            product = get_product(product_id)
            if product is not None and product.routes:
                route = ask("Route (iv/im)", args.route or DEFAULT_ROUTE.value).lower()
            run_once(compute, args, product_id, raw_weight, route)
    except (KeyboardInterrupt, EOFError):
        print()
        return 0
    except requests.RequestException as e:
        print(color(f"[error] API call failed: {e}", "red"))
        return 1


if __name__ == "__main__":
    sys.exit(main())

import argparse
import json
import logging
from urllib.parse import urlsplit

from search.flat import FlatQuery
from search.query import Query


def _query_part(text: str) -> str:
    # accept a full deep link as well as a bare query string
    if "?" in text:
        return urlsplit(text).query
    return text


def inspect(text: str) -> int:
    query = Query.parse(_query_part(text))

    print("Raw parameters:")
    for name, value in sorted(query.parameters.items()):
        print(f"  {name} = {value!r}")

    print(f"\nCanonical: {query.build()}")

    typed = FlatQuery(query).to_dict()
    print("\nTyped view:")
    print(json.dumps(typed, indent=2, ensure_ascii=False))

    untyped = sorted(set(query.parameters) - set(Query.TYPED_PARAMETERS.values()))
    if untyped:
        print(f"\nNo typed accessor for: {', '.join(untyped)}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Inspect a search query string, or serve the inspection API.")
    parser.add_argument("query_string", nargs="?", help="Query string or URL to inspect")
    parser.add_argument("--serve", action="store_true", help="Run the inspection API with uvicorn")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind (default: 8000)")
    parser.add_argument("--verbose", action="store_true", help="Log skipped query components")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.serve:
        import uvicorn
        uvicorn.run("app.main:app", host=args.host, port=args.port)
        return 0

    if args.query_string is None:
        print("query_string is required unless --serve is given")
        return 2

    return inspect(args.query_string)


if __name__ == "__main__":
    raise SystemExit(main())

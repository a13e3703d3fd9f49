#!/usr/bin/env python3
"""
Orderline - quick-order parsing service with a small web UI
"""

import sys
import json
import logging
from dataclasses import asdict
from http.server import HTTPServer, BaseHTTPRequestHandler
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse, parse_qs

from orderline.catalog import Catalog, load_catalog
from orderline.catalog_client import CatalogClient
from orderline.config import load_config
from orderline.logging_config import setup_logging
from orderline.order_parser import (
    match_order_lines,
    parse_quick_order,
    split_quantity_and_name,
)
from orderline.product_matcher import fuzzy_match


logger = logging.getLogger(__name__)


class QuickOrderService:
    def __init__(self, config: Optional[Dict[str, Any]] = None, client=None):
        self.config = config if config is not None else load_config()
        self.client = client
        if self.client is None and self.config.get('api_url'):
            self.client = CatalogClient(self.config['api_url'], api_key=self.config.get('api_key'))
        self.catalog = Catalog()
        self.source = 'empty'
        self.reload_catalog()

    def reload_catalog(self) -> int:
        catalog_path = self.config.get('catalog_path')
        if catalog_path:
            try:
                self.catalog = load_catalog(catalog_path)
                self.source = str(catalog_path)
            except (OSError, ValueError) as e:
                # CatalogFormatError and JSONDecodeError are both ValueErrors
                logger.error(f"Could not load catalog {catalog_path}: {e}")
                self.catalog = Catalog()
                self.source = 'empty'
        elif self.client is not None:
            self.client.invalidate()
            self.catalog = self.client.get_catalog()
            self.source = 'api'
        logger.info(f"Catalog ready: {len(self.catalog.items)} items from {self.source}")
        return len(self.catalog.items)

    def parse(self, text: str) -> Dict[str, Any]:
        """Quick-order syntax first, then the looser split + fuzzy match"""
        items = self.catalog.items
        result = parse_quick_order(text, items)
        if result:
            return {'text': text, 'matched': True, 'method': 'quick',
                    'quantity': result.quantity, 'item': result.item.to_dict()}

        parsed = split_quantity_and_name(text)
        item = fuzzy_match(parsed.name, items)
        return {
            'text': text,
            'matched': item is not None,
            'method': 'fuzzy',
            'name': parsed.name,
            'quantity': parsed.quantity,
            'item': item.to_dict() if item else None,
        }

    def parse_many(self, text: str) -> List[Dict[str, Any]]:
        rows = []
        for line in match_order_lines(text, self.catalog.items):
            row = asdict(line)
            row['item'] = line.item.to_dict() if line.item else None
            row['matched'] = line.matched
            rows.append(row)
        return rows

    def get_status(self) -> Dict[str, Any]:
        return {
            'source': self.source,
            'items': len(self.catalog.items),
            'categories': len(self.catalog.categories),
            'suppliers': len(self.catalog.suppliers),
        }

    def close(self):
        if self.client is not None:
            self.client.close()


HTML = """
<!DOCTYPE html>
<html>
<head>
    <title>Orderline</title>
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <style>
        body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
               max-width: 800px; margin: 0 auto; padding: 20px; background: #f5f5f5; }
        .card { background: white; padding: 20px; border-radius: 10px; margin-bottom: 20px; box-shadow: 0 2px 5px rgba(0,0,0,0.1); }
        textarea { width: 100%; height: 120px; font-size: 16px; }
        button { background: #007bff; color: white; border: none; padding: 12px 24px;
                 border-radius: 5px; cursor: pointer; font-size: 16px; margin: 5px 0; }
        table { width: 100%; border-collapse: collapse; }
        th, td { padding: 10px; text-align: left; border-bottom: 1px solid #ddd; }
        .miss { color: #721c24; }
    </style>
</head>
<body>
    <h1>Orderline</h1>
    <div class="card">
        <p>Catalog: <span id="status">loading...</span></p>
        <textarea id="order" placeholder="Cucumber 4pcs&#10;Egg 30&#10;Box pasta 2pcs"></textarea>
        <button onclick="parseOrder()">Match</button>
        <button onclick="reload()">Reload catalog</button>
    </div>
    <div class="card"><div id="result"></div></div>
    <script>
        function parseOrder() {
            const q = encodeURIComponent(document.getElementById('order').value);
            fetch('/parse?q=' + q).then(r => r.json()).then(rows => {
                const table = document.createElement('table');
                addRow(table, 'th', ['Line', 'Item', 'Qty']);
                rows.forEach(r => {
                    const tr = addRow(table, 'td', [r.text, r.item ? r.item.name : 'no match', r.quantity]);
                    if (!r.item) tr.children[1].className = 'miss';
                });
                document.getElementById('result').replaceChildren(table);
            });
        }
        function addRow(table, tag, values) {
            const tr = table.insertRow();
            values.forEach(v => {
                const cell = document.createElement(tag);
                cell.textContent = v;
                tr.appendChild(cell);
            });
            return tr;
        }
        function reload() { fetch('/reload').then(loadStatus); }
        function loadStatus() {
            fetch('/status').then(r => r.json()).then(d => {
                document.getElementById('status').innerText = d.items + ' items (' + d.source + ')';
            });
        }
        loadStatus();
    </script>
</body>
</html>
"""


class Handler(BaseHTTPRequestHandler):
    service: QuickOrderService = None

    def _send(self, status: int, body: bytes, content_type: str):
        self.send_response(status)
        self.send_header('Content-type', content_type)
        self.end_headers()
        self.wfile.write(body)

    def _send_json(self, data, status: int = 200):
        self._send(status, json.dumps(data).encode(), 'application/json')

    def do_GET(self):
        url = urlparse(self.path)
        if url.path == '/':
            self._send(200, HTML.encode(), 'text/html')
        elif url.path == '/status':
            self._send_json(self.service.get_status())
        elif url.path == '/parse':
            query = parse_qs(url.query).get('q', [''])[0]
            if not query.strip():
                self._send_json({'error': 'missing q'}, status=400)
                return
            if '\n' in query.strip():
                self._send_json(self.service.parse_many(query))
            else:
                self._send_json([self.service.parse(query.strip())])
        elif url.path == '/reload':
            self._send_json({'items': self.service.reload_catalog()})
        else:
            self._send_json({'error': 'not found'}, status=404)

    def log_message(self, format, *args):
        logger.debug("%s - %s", self.address_string(), format % args)


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    config = load_config(argv[0] if argv else None)
    setup_logging(log_path=config.get('log_path'), level=config.get('log_level', 'INFO'))

    service = QuickOrderService(config)
    Handler.service = service

    port = int(config.get('http_port', 8080))
    server = HTTPServer(('', port), Handler)

    print("=" * 50)
    print("  Orderline")
    print("=" * 50)
    print(f"Catalog: {len(service.catalog.items)} items ({service.source})")
    print(f"Web UI: http://localhost:{port}")
    print("=" * 50)
    print("Press Ctrl+C to stop")

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        print("\nStopping...")
    finally:
        server.server_close()
        service.close()


if __name__ == '__main__':
    main()

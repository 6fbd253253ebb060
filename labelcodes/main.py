import logging
import math
import os
import socket

from flask import Flask, Response, jsonify, request

from labelcodes import __version__
from labelcodes.code128 import encode_barcode, encode_values
from labelcodes.qr_code import PayloadTooLarge, ecc_from_name, encode_text
from labelcodes.render import (
    barcode_to_image,
    barcode_to_svg,
    image_to_png_bytes,
    qr_to_image,
    qr_to_svg,
)

logger = logging.getLogger(__name__)

WEB_HOST = os.environ.get("LABELCODES_HOST", "0.0.0.0")
WEB_PORT = int(os.environ.get("LABELCODES_PORT", "5050"))
DEFAULT_ECC = os.environ.get("LABELCODES_DEFAULT_ECC", "L")
QUIET_ZONE = int(os.environ.get("LABELCODES_QUIET_ZONE", "4"))
BOX_SIZE = int(os.environ.get("LABELCODES_BOX_SIZE", "10"))
QR_SVG_SIZE = 64
BARCODE_HEIGHT = 48
BARCODE_MODULE_WIDTH = 2
FORMATS = ("svg", "png", "json")

# Upper bounds for request parameters; PNG output is allocated in memory.
MAX_BOX_SIZE = 40
MAX_QUIET_ZONE = 40
MAX_QR_SVG_SIZE = 10000
MAX_BARCODE_HEIGHT = 2000
MAX_MODULE_WIDTH = 10
MAX_MIN_BAR_WIDTH = 50
MAX_BARCODE_CHARS = 128


class InvalidParameter(ValueError):
    pass


def get_local_ip():
    ip = "127.0.0.1"
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.connect(("8.8.8.8", 80))
        ip = sock.getsockname()[0]
    except OSError:
        pass
    finally:
        sock.close()
    return ip


def _required_value():
    value = request.args.get("value", "")
    if not value:
        raise InvalidParameter("Falta el parametro 'value'")
    return value


def _number_arg(name, default, maximum, cast=int):
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        number = cast(raw)
    except ValueError:
        raise InvalidParameter(f"Parametro '{name}' invalido: {raw}") from None
    if (isinstance(number, float) and not math.isfinite(number)) or number < 0:
        raise InvalidParameter(f"Parametro '{name}' invalido: {raw}")
    if number > maximum:
        raise InvalidParameter(f"Parametro '{name}' demasiado grande: {raw} (maximo {maximum})")
    return number


def _format_arg():
    fmt = request.args.get("format", "svg").lower()
    if fmt not in FORMATS:
        raise InvalidParameter(f"Formato no soportado: {fmt}")
    return fmt


def _svg_response(svg):
    return Response(svg, mimetype="image/svg+xml")


def _png_response(img):
    return Response(image_to_png_bytes(img), mimetype="image/png")


def create_app():
    app = Flask(__name__)

    @app.errorhandler(InvalidParameter)
    def bad_request(exc):
        return jsonify({"error": str(exc)}), 400

    @app.errorhandler(PayloadTooLarge)
    def payload_too_large(exc):
        logger.warning("QR rechazado: %s", exc)
        return jsonify({"error": str(exc), "bytes": exc.num_bytes, "ecc": exc.ecc.name}), 413

    @app.route("/api/ping")
    def ping():
        return jsonify({"status": "ok", "version": __version__})

    @app.route("/api/qr")
    def qr():
        value = _required_value()
        fmt = _format_arg()
        try:
            ecc = ecc_from_name(request.args.get("ecc", DEFAULT_ECC))
        except ValueError as exc:
            raise InvalidParameter(str(exc)) from None
        try:
            code = encode_text(value, ecc)
            if fmt == "json":
                return jsonify(
                    {
                        "version": code.version,
                        "size": code.size,
                        "ecc": code.ecc.name,
                        "mask": code.mask,
                        "modules": ["".join("1" if dark else "0" for dark in row) for row in code.modules],
                    }
                )
            quiet_zone = _number_arg("quiet_zone", QUIET_ZONE, MAX_QUIET_ZONE)
            if fmt == "png":
                img = qr_to_image(code, box_size=_number_arg("box_size", BOX_SIZE, MAX_BOX_SIZE), border=quiet_zone)
                return _png_response(img)
            size = _number_arg("size", QR_SVG_SIZE, MAX_QR_SVG_SIZE, float)
            return _svg_response(qr_to_svg(code, size=size, quiet_zone=quiet_zone))
        except PayloadTooLarge:
            raise
        except ValueError as exc:
            raise InvalidParameter(str(exc)) from None

    @app.route("/api/barcode")
    def barcode():
        value = _required_value()
        if len(value) > MAX_BARCODE_CHARS:
            raise InvalidParameter(f"Codigo de barras demasiado largo: {len(value)} caracteres (maximo {MAX_BARCODE_CHARS})")
        fmt = _format_arg()
        code = encode_barcode(value)
        if fmt == "json":
            return jsonify(
                {
                    "bars": [{"x": bar.x, "width": bar.width} for bar in code.bars],
                    "total_width": code.total_width,
                    "codewords": encode_values(value),
                }
            )
        height = _number_arg("height", BARCODE_HEIGHT, MAX_BARCODE_HEIGHT)
        try:
            if fmt == "png":
                img = barcode_to_image(
                    code,
                    module_width=_number_arg("module_width", BARCODE_MODULE_WIDTH, MAX_MODULE_WIDTH),
                    height=height,
                )
                return _png_response(img)
            min_bar_width = _number_arg("min_bar_width", 1, MAX_MIN_BAR_WIDTH, float)
            svg = barcode_to_svg(code, height=height, min_bar_width=min_bar_width)
        except ValueError as exc:
            raise InvalidParameter(str(exc)) from None
        return _svg_response(svg)

    return app


def start_web_server(app=None):
    app = app or create_app()
    app.run(host=WEB_HOST, port=WEB_PORT, debug=False, use_reloader=False)


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    url = f"http://{get_local_ip()}:{WEB_PORT}"
    print(f"Servidor de etiquetas disponible en: {url}")
    try:
        start_web_server()
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()

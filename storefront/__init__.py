import os

import click
from flask import Flask, current_app, jsonify, render_template, request
from flask.cli import with_appcontext

from storefront import accounts
from storefront.cart import Cart
from storefront.checkout import CheckoutValidationError, place_order, quote
from storefront.ledger import InvalidStatusError, OrderLedger, filter_orders
from storefront.locations import (
    COUNTRIES,
    currency_for,
    currency_symbol_for,
    get_regions,
)
from storefront.notifications import send_order_emails
from storefront.pricing import LineItem, convert_subtotal
from storefront.promo import InvalidPromoCodeError, PromoCodeStore, config_lookup
from storefront.shipping import get_shipping_options
from storefront.storage import DatabaseStore, StoredValue, db

STORE_EXTENSION = "storefront.store"


def error_response(scope, code, name, status=422):
    return jsonify({
        "errors": {
            scope: {
                "code": code,
                "name": name,
            }
        }
    }), status


def missing_fields_response(scope):
    return error_response(scope, "missing-fields", "One or more required fields are missing")


def not_signed_in_response():
    return error_response("user", "not-signed-in", "You need to sign in first", 401)


def get_store():
    return current_app.extensions[STORE_EXTENSION]


def cart_payload(store):
    cart = Cart(store)
    promo = PromoCodeStore(store, lookup=None).active()
    return {
        "items": [item.to_dict() for item in cart.items()],
        "subtotal": cart.subtotal(),
        "promo": promo.to_dict() if promo else None,
    }


def invoice_lines(order):
    """Item lines of a stored order, priced in the order currency."""
    country = order["customerDetails"]["country"]
    lines = []
    for item in order["items"]:
        try:
            line = LineItem.from_dict(item)
        except (AttributeError, TypeError, ValueError):
            continue
        price = round(convert_subtotal(line.unit_price, country), 2)
        lines.append({
            "name": line.name,
            "quantity": line.quantity,
            "price": price,
            "total": round(price * line.quantity, 2),
        })
    return lines


def order_notifier(app):
    """E-mail sender for placed orders, None when no service is configured."""
    service_url = app.config.get("EMAIL_SERVICE_URL")
    if not service_url:
        return None

    def notify(order):
        send_order_emails(order, service_url, app.config["ADMIN_EMAIL"])

    return notify


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_mapping(
        SECRET_KEY='dev',
        DATABASE=os.path.join(app.instance_path, 'storefront.sqlite'),
        STORE=None,
        PROMO_CODES={"WELCOME10": 10, "SAVE20": 20},
        EMAIL_SERVICE_URL=None,
        ADMIN_EMAIL="admin@example.com",
        ADMIN_CREDENTIALS={"admin@example.com": "admin123"},
        ENFORCE_STATUS_TRANSITIONS=False,
        LOG_LEVEL="INFO",
    )

    if test_config is None:
        # load the instance config, if it exists, when not testing
        app.config.from_pyfile('config.py', silent=True)
    else:
        # load the test config if passed in
        app.config.update(test_config)

    # ensure the instance folder exists
    try:
        os.makedirs(app.instance_path)
    except OSError:
        pass

    app.logger.setLevel(app.config["LOG_LEVEL"])

    store = app.config["STORE"]
    uses_database = store is None
    if uses_database:
        db.init(app.config["DATABASE"])
        store = DatabaseStore(db)
    app.extensions[STORE_EXTENSION] = store

    @app.before_request
    def before_request():
        if uses_database:
            db.connect(reuse_if_open=True)

    @app.after_request
    def after_request(response):
        if uses_database and not db.is_closed():
            db.close()
        return response

    @app.route('/api/locations/<country>')
    def api_location(country):
        if country not in COUNTRIES:
            return error_response("country", "not-found", "Unsupported country", 404)

        return jsonify({
            "country": country,
            "name": COUNTRIES[country],
            "regions": get_regions(country),
            "shippingOptions": get_shipping_options(country),
            "currency": currency_for(country),
            "currencySymbol": currency_symbol_for(country),
        })

    @app.route('/cart', methods=['GET'])
    def get_cart():
        return jsonify({"cart": cart_payload(get_store())})

    @app.route('/cart/items', methods=['POST'])
    def add_cart_item():
        payload = request.get_json(silent=True) or {}
        if not {"id", "name", "price"}.issubset(payload.keys()):
            return missing_fields_response("item")

        try:
            unit_price = float(payload["price"])
            quantity = int(payload.get("quantity", 1))
        except (TypeError, ValueError):
            return missing_fields_response("item")

        if quantity < 1:
            return error_response("item", "invalid-quantity", "Quantity must be at least 1")
        if unit_price < 0:
            return error_response("item", "invalid-price", "Price cannot be negative")

        store = get_store()
        Cart(store).add_item(str(payload["id"]), str(payload["name"]), unit_price, quantity)
        return jsonify({"cart": cart_payload(store)}), 201

    @app.route('/cart/items/<item_id>', methods=['PUT'])
    def update_cart_item(item_id):
        payload = request.get_json(silent=True) or {}
        try:
            quantity = int(payload["quantity"])
        except (KeyError, TypeError, ValueError):
            return missing_fields_response("item")

        store = get_store()
        Cart(store).update_quantity(item_id, quantity)
        return jsonify({"cart": cart_payload(store)})

    @app.route('/cart/items/<item_id>', methods=['DELETE'])
    def remove_cart_item(item_id):
        store = get_store()
        Cart(store).remove_item(item_id)
        return jsonify({"cart": cart_payload(store)})

    @app.route('/cart/promo', methods=['POST'])
    def apply_promo():
        payload = request.get_json(silent=True) or {}
        store = get_store()
        promo_store = PromoCodeStore(store, config_lookup(app.config["PROMO_CODES"]))
        try:
            promo_store.apply(payload.get("code"))
        except InvalidPromoCodeError as exc:
            return error_response("promo", "invalid-code", exc.message)
        return jsonify({"cart": cart_payload(store)})

    @app.route('/cart/promo', methods=['DELETE'])
    def remove_promo():
        store = get_store()
        PromoCodeStore(store, lookup=None).remove()
        return jsonify({"cart": cart_payload(store)})

    @app.route('/checkout/quote', methods=['POST'])
    def checkout_quote():
        payload = request.get_json(silent=True) or {}
        pricing = quote(get_store(), payload)
        return jsonify({"pricing": pricing.to_dict()})

    @app.route('/checkout', methods=['POST'])
    def checkout():
        payload = request.get_json(silent=True) or {}
        try:
            order = place_order(get_store(), payload, notify=order_notifier(app))
        except CheckoutValidationError as exc:
            return error_response("order", exc.code, exc.message)
        return jsonify({"order": order}), 201

    @app.route('/order/last', methods=['GET'])
    def last_order():
        order = OrderLedger(get_store()).last_order()
        if order is None:
            return error_response("order", "not-found", "No order has been placed yet", 404)
        return jsonify({"order": order})

    @app.route('/register', methods=['POST'])
    def register():
        payload = request.get_json(silent=True) or {}
        try:
            user = accounts.register_user(
                get_store(),
                payload.get("firstName", ""),
                payload.get("lastName", ""),
                payload.get("email", ""),
                payload.get("password", ""),
                phone=payload.get("phone", ""),
                address=payload.get("address", ""),
            )
        except accounts.AccountError as exc:
            return error_response("user", exc.code, exc.message)
        return jsonify({"user": user}), 201

    @app.route('/login', methods=['POST'])
    def login():
        payload = request.get_json(silent=True) or {}
        try:
            user = accounts.login(get_store(), payload.get("email"), payload.get("password"))
        except accounts.AccountError as exc:
            return error_response("user", exc.code, exc.message, 401)
        return jsonify({"user": user})

    @app.route('/logout', methods=['POST'])
    def logout():
        accounts.logout(get_store())
        return jsonify({}), 200

    @app.route('/admin/login', methods=['POST'])
    def admin_login():
        payload = request.get_json(silent=True) or {}
        try:
            user = accounts.admin_login(
                get_store(),
                payload.get("email"),
                payload.get("password"),
                app.config["ADMIN_CREDENTIALS"],
            )
        except accounts.AccountError as exc:
            return error_response("user", exc.code, exc.message, 401)
        return jsonify({"user": user})

    @app.route('/account', methods=['GET'])
    def get_account():
        user = accounts.get_current_user(get_store())
        if user is None:
            return not_signed_in_response()
        return jsonify({"user": user})

    @app.route('/account', methods=['PUT'])
    def update_account():
        payload = request.get_json(silent=True) or {}
        try:
            user = accounts.update_profile(get_store(), payload)
        except accounts.AccountError:
            return not_signed_in_response()
        return jsonify({"user": user})

    @app.route('/account/orders', methods=['GET'])
    def account_orders():
        store = get_store()
        user = accounts.get_current_user(store)
        if user is None:
            return not_signed_in_response()
        orders = OrderLedger(store).list_orders_by_email(user.get("email", ""))
        return jsonify({"orders": orders})

    @app.route('/account/orders/<order_id>/invoice', methods=['GET'])
    def account_invoice(order_id):
        store = get_store()
        user = accounts.get_current_user(store)
        if user is None:
            return not_signed_in_response()

        email = user.get("email", "")
        order = OrderLedger(store).get_order(order_id)
        if order is None or not email or order["customerDetails"]["email"] != email:
            return error_response("order", "not-found", "The requested order does not exist", 404)

        return render_template(
            "invoice.html",
            order=order,
            customer=order["customerDetails"],
            lines=invoice_lines(order),
            order_date=str(order["date"])[:10],
        )

    def require_admin():
        user = accounts.get_current_user(get_store())
        if user is None:
            return not_signed_in_response()
        if not accounts.is_admin(user):
            return error_response("user", "forbidden", "Unauthorized access", 403)
        return None

    @app.route('/admin/orders', methods=['GET'])
    def admin_orders():
        denied = require_admin()
        if denied is not None:
            return denied

        orders = filter_orders(
            OrderLedger(get_store()).list_orders(),
            search=request.args.get("search", ""),
            status=request.args.get("status", "all"),
            date_range=request.args.get("range", "all"),
        )
        return jsonify({"orders": orders})

    @app.route('/admin/orders/<order_id>', methods=['GET'])
    def admin_get_order(order_id):
        denied = require_admin()
        if denied is not None:
            return denied

        order = OrderLedger(get_store()).get_order(order_id)
        if order is None:
            return error_response("order", "not-found", "The requested order does not exist", 404)
        return jsonify({"order": order})

    @app.route('/admin/orders/<order_id>', methods=['PUT'])
    def admin_update_order(order_id):
        denied = require_admin()
        if denied is not None:
            return denied

        payload = request.get_json(silent=True) or {}
        status = payload.get("status")
        payment_status = payload.get("paymentStatus")
        if status is None and payment_status is None:
            return missing_fields_response("order")

        try:
            order = OrderLedger(get_store()).update_order(
                order_id,
                status=status,
                payment_status=payment_status,
                enforce_transitions=app.config["ENFORCE_STATUS_TRANSITIONS"],
            )
        except InvalidStatusError as exc:
            return error_response("order", "invalid-status", str(exc))
        if order is None:
            return error_response("order", "not-found", "The requested order does not exist", 404)

        app.logger.info("Order %s updated by admin", order_id)
        return jsonify({"order": order})

    app.cli.add_command(init_db_command)
    app.cli.add_command(clear_orders_command)
    return app


def init_db():
    """Create the key-value table."""
    db.connect(reuse_if_open=True)
    db.create_tables([StoredValue])
    db.close()


@click.command('init-db')
@with_appcontext
def init_db_command():
    """Create the storage tables."""
    init_db()
    click.echo('Initialized the database.')


@click.command('clear-orders')
@with_appcontext
def clear_orders_command():
    """Delete every order in the ledger."""
    OrderLedger(get_store()).clear()
    click.echo('Cleared the order ledger.')

from flask import Flask, jsonify, request, session
import uuid

from config import Config
from core.storefront import Storefront
from models.cart import LineItemKey, get_cart_item_count
from services.cart_service import format_price
from services.validation import ValidationError, validate_order_payload, ERROR_INCOMPLETE
from utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def create_app(storefront: Storefront = None, config: Config = None) -> Flask:
    """Build the storefront application around ``storefront``."""
    config = config or (storefront.config if storefront else Config.from_env())
    configure_logging(config.log_level)
    storefront = storefront or Storefront(config)

    app = Flask(__name__)
    app.secret_key = config.secret_key
    app.config['STOREFRONT'] = storefront

    def current_cart():
        # 브라우저별 장바구니 슬롯 ID (인증이 아닌 저장 키 용도)
        if 'cart_id' not in session:
            session['cart_id'] = str(uuid.uuid4())
        return storefront.cart_for(session['cart_id'])

    def cart_response(cart, status=200):
        return jsonify({
            'cart': cart.to_dict(),
            'count': get_cart_item_count(cart),
            'formattedTotal': format_price(cart.total),
        }), status

    def item_id_from(data):
        # 문자열 itemId("{id}-{size}-{color}") 또는 개별 필드로 장바구니 항목 지정
        if data.get('itemId'):
            return str(data['itemId'])
        return LineItemKey(str(data.get('productId', '')), data.get('size') or '', data.get('color') or '')

    @app.route('/api/products', methods=['GET'])
    def list_products():
        """List the catalog, optionally filtered"""
        category = request.args.get('category')
        query = request.args.get('q')

        if request.args.get('featured', '').lower() in ('1', 'true'):
            result = storefront.get_featured_products()
        elif query:
            result = storefront.search_products(query)
        elif category:
            result = storefront.get_products_by_category(category)
        else:
            result = storefront.get_products()
        return jsonify(result.to_dict())

    @app.route('/api/products/<product_id>', methods=['GET'])
    def get_product(product_id):
        lookup = storefront.get_product_by_id(product_id)
        if lookup.product is None:
            return jsonify({'error': 'Producto no encontrado'}), 404
        return jsonify({'product': lookup.product.to_dict(), 'source': lookup.source})

    @app.route('/api/orders', methods=['POST'])
    def create_order():
        """Validate a checkout payload and create the order"""
        try:
            payload = request.get_json(silent=True)
            if payload is None:
                return jsonify({'error': ERROR_INCOMPLETE}), 400

            try:
                order_data = validate_order_payload(payload)
            except ValidationError as e:
                return jsonify(e.to_dict()), 400

            result = storefront.create_order(order_data)
            if not result:
                return jsonify({'error': 'Error al crear el pedido'}), 500

            return jsonify({'success': True, **result.to_dict()}), 201

        except Exception as e:
            logger.error("Order API failed", error=str(e))
            return jsonify({'error': 'Error interno del servidor'}), 500

    @app.route('/api/orders', methods=['GET'])
    def list_orders():
        email = (request.args.get('email') or '').strip()
        if not email:
            return jsonify({'error': 'El correo electrónico es obligatorio'}), 400
        orders = storefront.get_orders_by_email(email)
        return jsonify({'orders': [order.to_dict() for order in orders]})

    @app.route('/api/orders/<order_id>', methods=['GET'])
    def get_order(order_id):
        result = storefront.get_order_details(order_id)
        if not result:
            return jsonify({'error': 'Pedido no encontrado'}), 404
        return jsonify(result.to_dict())

    @app.route('/api/cart', methods=['GET'])
    def get_cart():
        return cart_response(current_cart().get_cart())

    @app.route('/api/cart/items', methods=['POST'])
    def add_cart_item():
        """Add a product to the cart by id or by product payload"""
        data = request.get_json(silent=True) or {}
        cart_service = current_cart()

        product = data.get('product')
        if data.get('productId'):
            lookup = storefront.get_product_by_id(str(data['productId']))
            if lookup.product is None:
                return jsonify({'error': 'Producto no encontrado'}), 404
            product = lookup.product

        cart = cart_service.add_to_cart(
            product,
            data.get('quantity', 1),
            data.get('size') or '',
            data.get('color') or '',
        )
        return cart_response(cart)

    @app.route('/api/cart/items', methods=['PATCH'])
    def update_cart_item():
        data = request.get_json(silent=True) or {}
        quantity = data.get('quantity')
        if not isinstance(quantity, int) or isinstance(quantity, bool):
            return jsonify({'error': 'Cantidad inválida'}), 400
        return cart_response(current_cart().update_cart_item_quantity(item_id_from(data), quantity))

    @app.route('/api/cart/items', methods=['DELETE'])
    def remove_cart_item():
        data = request.get_json(silent=True) or {}
        return cart_response(current_cart().remove_from_cart(item_id_from(data)))

    @app.route('/api/cart', methods=['DELETE'])
    def clear_cart():
        cart_service = current_cart()
        cart_service.clear_cart()
        return cart_response(cart_service.get_cart())

    @app.route('/health')
    def health():
        """Health check endpoint"""
        return jsonify({
            'status': 'ok',
            'database': 'configured' if config.database_configured else 'not configured',
        })

    return app


app = create_app()

if __name__ == '__main__':
    settings = app.config['STOREFRONT'].config

    print("=== Sneaker Storefront Server ===")
    print(f"Starting server on http://localhost:{settings.port}")
    print("Press Ctrl+C to stop")

    app.run(
        host='0.0.0.0',
        port=settings.port,
        debug=settings.debug
    )

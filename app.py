import os
import logging
from flask import Flask, request, jsonify
from flask_cors import CORS
from dotenv import load_dotenv

from bill_discounts.assembler import BillAssembler
from bill_discounts.summarizer import DiscountSummarizer

load_dotenv()

# Configure logging
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)

assembler = BillAssembler()
summarizer = DiscountSummarizer()


@app.route('/apply-discounts', methods=['POST'])
def apply_discounts():
    """API endpoint to apply a bill's discounts and return the payable net."""
    try:
        data = request.get_json(silent=True)

        if not data:
            return jsonify({
                "is_success": False,
                "error": "Missing bill in request body"
            }), 400

        bill = assembler.assemble_from_dict(data)
        bill.apply_discounts()
        summary = summarizer.summarize(bill)

        return jsonify({
            "is_success": True,
            "data": summary.to_dict()
        }), 200

    except ValueError as e:
        logger.warning(f"Rejected bill: {str(e)}")
        return jsonify({
            "is_success": False,
            "error": str(e)
        }), 400
    except Exception as e:
        logger.exception("Failed to apply discounts")
        return jsonify({
            "is_success": False,
            "error": str(e)
        }), 500


@app.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({"status": "healthy"}), 200


if __name__ == '__main__':
    port = int(os.getenv('PORT', 5001))
    app.run(host='0.0.0.0', port=port, debug=os.getenv('DEBUG', 'False').lower() == 'true')

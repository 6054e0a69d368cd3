"""
Sample transactional emails for testing.

Each sample is a (subject, body, sender) tuple taken from real inbox
shapes:
- Chilean CLP receipts and utility bills
- US subscription receipts (USD)
- Brazilian PIX transfers (BRL)
"""

import base64

SAMPLE_PEDIDOSYA = (
    "Comprobante de Pago PedidosYa",
    "Hola David, pagaste $ 12.500 con tu tarjeta terminada en 1234. ¡Gracias por tu compra!",
    "PedidosYa <noreply@pedidosya.com>",
)

SAMPLE_GOOGLE_USD = (
    "Your Google Storage receipt",
    "Payment of 1.99 USD was successful on Jan 15.",
    "Google <billing-noreply@google.com>",
)

SAMPLE_NUBANK_PIX = (
    "Você recebeu um PIX!",
    "Recibiste R$ 500,00 de Juan Perez.",
    "NuBank <no-reply@nubank.com.br>",
)

SAMPLE_UBER = (
    "Tu viaje del lunes",
    "Total: $ 3.500",
    "Uber <uber.chile@uber.com>",
)

SAMPLE_ENEL_BILL = (
    "Tu boleta Enel está disponible",
    """
Estimado cliente,

Nro de cliente: 2043311-5
Fecha de emisión: 03/01/2026
Consumo del periodo: 245 kWh

Cargo fijo               $ 1.120
Energía                  $ 31.870
Total a pagar            $ 32.990

Fecha de vencimiento: 20/01/2026
""",
    '"Enel Distribución" <boletas@enel.cl>',
)

ALL_SAMPLES = [
    SAMPLE_PEDIDOSYA,
    SAMPLE_GOOGLE_USD,
    SAMPLE_NUBANK_PIX,
    SAMPLE_UBER,
    SAMPLE_ENEL_BILL,
]


def encode_body(text: str) -> str:
    """Encode text the way the Gmail API returns bodies (base64url, no padding)."""
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii").rstrip("=")


def build_gmail_message(
    message_id: str,
    subject: str,
    body: str,
    sender: str,
    date_header: str = "Tue, 20 Jan 2026 10:15:00 -0300",
    mime_type: str = "text/plain",
) -> dict:
    """Build a Gmail `users.messages.get` response with a multipart body."""
    headers = [
        {"name": "From", "value": sender},
        {"name": "Subject", "value": subject},
    ]
    if date_header:
        headers.append({"name": "Date", "value": date_header})

    return {
        "id": message_id,
        "threadId": message_id,
        "internalDate": "1768917600000",
        "payload": {
            "mimeType": "multipart/alternative",
            "headers": headers,
            "body": {"size": 0},
            "parts": [
                {
                    "mimeType": mime_type,
                    "body": {"data": encode_body(body)},
                },
            ],
        },
    }

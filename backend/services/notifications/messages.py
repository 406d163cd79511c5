CUSTOMER_CONFIRMATION = """*{business_name} Order Confirmation*

Hi {customer_name},

Your order has been successfully placed and confirmed!

*Order ID:* {order_id}
*Delivery Date:* {delivery_date}

*Your Order:*
{items}

*Total Amount:* {currency}{total_amount}

*Delivery Address:*
{delivery_address}

*Status:* Confirmed
*Expected Delivery:* {delivery_date}

Thank you for choosing {business_name}!
We're preparing your fresh baked goods with love.

For any queries, feel free to contact us.

*Track your order:* Use Order ID {order_id}"""

BUSINESS_NOTIFICATION = """*{business_name} New Order*

*Order ID:* {order_id}
*Customer:* {customer_name}
*Phone:* {customer_phone}

*Delivery Date:* {delivery_date}

*Order Items:*
{items}

*Total Amount:* {currency}{total_amount}

*Delivery Address:*
{delivery_address}

*Status:* New Order - Needs Confirmation

Please confirm this order and update preparation status."""

ITEM_LINE = "{quantity}x {name} - {currency}{line_total}"

BOOKING_INVITE = "Hi! Click this link to place your order: {booking_url}"

BUSINESS_BOOKING_INVITE = (
    "Hello! Welcome to {business_name}. Click here to browse our menu and place your order: {booking_url}"
)

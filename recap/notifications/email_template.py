from html import escape
from recap.models import HOLDING


def _money(value):
    return f"${value:,.2f}" if value is not None else "N/A"


def prepare_ticker_section(snapshot, category):
    label = "Holding" if category == HOLDING else "Watchlist"
    headlines = "".join(f"<li>{escape(headline)}</li>" for headline in snapshot.headlines)
    return f"""    <div style="margin-bottom: 20px; padding: 15px; border: 1px solid #d1d5db; border-radius: 6px;">
      <h2 style="margin-top: 0;">{escape(snapshot.ticker)} <small style="color: #6b7280;">{label}</small></h2>
      <p><strong>Closing Price:</strong> {_money(snapshot.close_price)}</p>
      <p><strong>Weekly High:</strong> {_money(snapshot.weekly_high)}</p>
      <p><strong>Weekly Low:</strong> {_money(snapshot.weekly_low)}</p>
      <p><strong>Top News:</strong></p>
      <ul>{headlines}</ul>
    </div>
"""


def prepare_email_body(user_name, sections):
    return f"""<html>
  <body style="font-family: sans-serif;">
    <h1>Hello {escape(user_name)}, your weekly recap is here!</h1>
    <p>A curated summary of your holdings and watchlist for the week.</p>
    <hr>
{"".join(sections)}    <p style="font-size: 0.8rem; color: #9ca3af;">Disclaimer: This email is for informational purposes only.</p>
    <p>Kind regards,<br>The Recap Team</p>
  </body>
</html>
"""

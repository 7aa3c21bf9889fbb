"""Streamlit viewer for the peak cache (``streamlit run floodpeaks/dashboard/app.py``)."""

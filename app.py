from __future__ import annotations

import streamlit as st

st.set_page_config(page_title="Vet Supply Desk", page_icon="💊", layout="wide")

pages = [
    st.Page("home.py", title="Home", icon="🏠"),
    st.Page("pages/7_🔐_Login.py", title="Sign in", icon="🔐"),
    st.Page("pages/1_📦_Products.py", title="Products", icon="📦"),
    st.Page("pages/2_🛒_Sales.py", title="Sales", icon="🛒"),
    st.Page("pages/3_🏷️_Inventory.py", title="Inventory", icon="🏷️"),
    st.Page("pages/4_📊_Reports.py", title="Reports", icon="📊"),
    st.Page("pages/5_👥_Clients.py", title="Clients", icon="👥"),
    st.Page("pages/6_🛍️_Storefront.py", title="Storefront", icon="🛍️"),
    st.Page("pages/8_🧪_Data_Management.py", title="Data Management", icon="🧪"),
]

st.navigation(pages).run()

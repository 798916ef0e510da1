"""
English auction engine with anti-sniping deadline extension and discounted settlement
"""

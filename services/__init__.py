"""Route services for the homestay gateway"""
